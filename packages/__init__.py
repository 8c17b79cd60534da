"""
Packages module.

Contains the monorepo package structure:
- shared: Shared types and enums
- release_monitor: Tag feed fetching and global events monitoring
"""
