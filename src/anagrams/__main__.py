"""Allow running the anagram generator with `python -m anagrams`."""

from anagrams import main

if __name__ == "__main__":
    main()
