"""
In-memory stand-in for the Ekraf backend, for tests and local development.
"""
from ekraf_admin.sandbox.app import create_app
from ekraf_admin.sandbox.state import SandboxState, seed_demo_data

__all__ = ["SandboxState", "create_app", "seed_demo_data"]
