"""
Command-line interface entry points for oedlex.

Entry points:
- oedlex: Look up, search and serve a legacy OED archive
"""
