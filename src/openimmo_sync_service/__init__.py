"""
OpenImmo Sync Service: imports an FTP-delivered OpenImmo feed into a Webflow collection.
"""

__version__ = "0.1.0"
