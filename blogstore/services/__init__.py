# Services package.
#
# Each module exposes a focused set of async functions that sit between
# the routers and the repositories:
#
#   content_service  - posts, comments, categories and tags
#   tag_aggregator   - one batched tag lookup per page of posts
#   user_service     - creator records
#   seed_service     - initial content load from a JSON manifest
#
# All service functions accept an AsyncSession as their first argument
# so that the caller controls the transaction boundary via ``get_db`` or
# ``session_scope``.
