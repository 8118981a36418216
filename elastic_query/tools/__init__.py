"""
Elasticsearch operations used by the query builder.
"""
