"""Command-line interface."""
from barometer.main import main

if __name__ == "__main__":
    main()
