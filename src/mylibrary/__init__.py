# ABOUTME: mylibrary - a personal e-book library that uses a cloud file store as its database.
# ABOUTME: Folders are the index, files are the records, and file properties are the schema.
