"""
citoken - OAuth test-token lifecycle tool for CI-tested packages.

Acquires an OAuth token, stores it as a test fixture, encrypts it for the
CI provider and keeps ignore lists, CI configuration and release branches
consistent.
"""

from citoken.interface.cli import main


if __name__ == "__main__":
    main()
