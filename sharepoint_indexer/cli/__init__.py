"""Command-line tools for the SharePoint indexer."""
