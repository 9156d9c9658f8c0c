"""
Ziti Edge Tunnel Installer

Bootstraps the OpenZiti ziti-edge-tunnel client on Debian and Ubuntu hosts:
  • Maps the running distribution onto an OpenZiti APT suite
  • Installs the OpenZiti signing key and APT repository
  • Installs ziti-edge-tunnel and enables its systemd service
  • Optionally enrolls an identity from a JWT file

Run with root privileges.
"""

VERSION: str = "1.0.0"
__version__ = VERSION
