"""Agent roles: body setups and idle-agent behaviour."""
