"""
Run with: python -m reelpreview
"""
from reelpreview.main import main

if __name__ == "__main__":
    main()
