"""
Fetcher Module Entry Point

Allows execution via: python -m rejestr.fetcher [ZK|KL|ALL]
"""

from rejestr.fetcher.cli import main

if __name__ == "__main__":
    main()
