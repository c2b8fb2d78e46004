# ABOUTME: Readers for embedded book metadata: Calibre metadata.opf documents and EPUB packages.
# ABOUTME: Both return BookMetadata with empty strings for anything they cannot find.
