"""twofa CLI: unified entry point.

Usage:
    python -m twofa add NAME SECRET [ISSUER]   # Add an account
    python -m twofa add-url URL                # Add from an otpauth:// URL
    python -m twofa list                       # Show current codes
    python -m twofa remove NAME                # Remove an account
    python -m twofa generate SECRET            # One-off code for a secret
    python -m twofa watch                      # Refresh codes every second
    python -m twofa dmenu                      # Pick with dmenu, copy to clipboard
    python -m twofa info                       # Storage location and status
    python -m twofa uri NAME                   # Print provisioning URI
"""

from twofa.cli import main

if __name__ == "__main__":
    main()
