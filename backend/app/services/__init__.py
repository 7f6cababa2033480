"""
Bilarn Blog Backend — Services Layer
======================================

Service Inventory:
    - BlogStore:          CRUD on the blogs table (record store)
    - BlobStore:          uploaded image files on local disk
    - markdown_renderer:  Markdown → HTML, used on single-post reads
    - BlogService:        orchestrates the stores for the /blogs routes
"""
