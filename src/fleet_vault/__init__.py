"""fleet-vault - local secrets vault with deployment into JSON configs.

Credentials live in an OpenSSL-compatible encrypted ``vault.json.enc``. On
``deploy`` they are decrypted and merged into downstream configuration files
(MCP server config) with a ``.bak`` backup and atomic replace.
"""

__version__ = "0.3.0"
