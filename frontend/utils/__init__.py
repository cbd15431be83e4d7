"""
Client utilities: configuration, the service client, validation, date
filtering and summaries.
"""
