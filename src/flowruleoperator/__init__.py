"""A Kubernetes operator that publishes rate-limiting flow rules to Redis
whenever a watched pod appears.
"""
