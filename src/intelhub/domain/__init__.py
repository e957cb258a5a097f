"""Domain layer: persistence-backed operations on users, groups, roles and capabilities."""
