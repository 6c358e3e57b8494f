from prometheus_client import CollectorRegistry

# /metrics exposes only collectors registered here, not the global default.
REGISTRY = CollectorRegistry(auto_describe=True)
