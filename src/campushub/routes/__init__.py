"""HTTP routers, one module per resource. `main.py` mounts each under `API_PREFIX`."""
