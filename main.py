"""
Entry point script for the arc-ask application.
This allows running the app directly from the project root.
"""
from arc_ask.main import main

if __name__ == "__main__":
    main()
