"""Allow ``python -m sharepoint_indexer.cli`` execution."""

from sharepoint_indexer.cli.index import main

main()
