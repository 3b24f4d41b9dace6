"""
Read APIs over the core store.

- queries: role/level lookups, accumulated competencies, career path views
- filters: role search and competency substring search
- comparisons: role-vs-role and level-vs-level competency comparisons
"""
