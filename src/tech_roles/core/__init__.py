"""
Core data layer.

- models: Entry and YearsRange records
- loader: read per-role documents and flatten them into entries
- store: in-memory store with code/role/category/competency/level indexes
- translator: role-name map and lazy per-role competency translations
"""
