"""
WSGI entry point for cPanel / Passenger and other WSGI servers.
Passenger will use 'application'.
"""
import sys
import os

# Add project directory to path so 'app' can be imported
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app import create_app

application = create_app()
