"""Member/role directory service."""
