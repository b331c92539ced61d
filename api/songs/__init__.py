"""
Song catalog feature: router -> service (workflow) -> repository (SQL).
"""
