"""
Infrastructure layer package.

Contains all I/O and external system integrations:
- Configuration file loading (config/)
- Logging setup
- Plaintext token store (secrets/)
- AES-256-CBC file cipher (crypto/)
- git and CI vendor command-line tools (tools/)
- Ignore lists and CI configuration editing (manifest/)
"""
