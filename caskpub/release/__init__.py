"""Release staging + publish pipeline (build, stage, sha256, gh release, cask)."""
