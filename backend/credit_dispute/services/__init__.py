"""Credit Dispute Engine - Services

extraction -> parsing -> analysis -> letters, with storage for per-user
state and pipeline for the timed analysis run.
"""
