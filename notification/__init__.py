"""Show a single notification on demand"""
