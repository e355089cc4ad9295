# Repositories package.
#
# Storage access for each table, one module per entity:
#
#   post_repository      - paginated listings + CRUD for Post
#   category_repository  - registry (get-or-create by slug) for Category
#   tag_repository       - registry for Tag + batched tags-by-post lookup
#   comment_repository   - CRUD + bulk deletes for Comment
#   user_repository      - creator records
#
# Functions take an AsyncSession first, flush but never commit, and return
# pydantic read models (or None when a lookup finds nothing).
