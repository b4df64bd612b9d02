"""Publish a universal DMG to GitHub Releases and keep the Homebrew cask in sync."""

__version__ = "0.1.0"
