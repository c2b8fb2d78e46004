# ABOUTME: Core services: the cached book service and the bulk Calibre migrator.
# ABOUTME: Both sit on top of the record store in mylibrary.store.
