#!/usr/bin/env python3
from bloggen.cli import main

if __name__ == "__main__":
    main()
