"""
Fetcher App - Resumable Registry Download

Responsibilities:
- Paginated download of the nursery (ZK) and children's club (KL) registries
- Bounded fixed-delay retry for every page request
- Resumption from the row count of an existing output file
- Incremental CSV persistence, flushed every few pages
- Terminal progress bar over the page count

Output:
- zlobki.csv (nurseries), kluby.csv (children's clubs)
"""
