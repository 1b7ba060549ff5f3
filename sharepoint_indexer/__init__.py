"""SharePoint document indexer.

Fetches one document from a SharePoint library, extracts and chunks its
text, embeds every chunk, and replaces the document's chunks in a search
index.
"""

__version__ = "0.1.0"
