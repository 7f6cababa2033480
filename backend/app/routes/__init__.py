"""
Bilarn Blog Backend — API Routes Package
==========================================

Route Inventory:
    - health.py:   GET  /                   (welcome banner)
                   GET  /health             (service health check)
    - blogs.py:    POST /blogs, GET /blogs, GET|PUT|DELETE /blogs/{id}
    - uploads.py:  GET  /uploads/{file}     (serve uploaded images)

Routes stay thin: read the request, call BlogService or BlobStore,
return a response model. Errors surface as application exceptions.
"""
