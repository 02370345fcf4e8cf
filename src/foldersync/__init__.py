"""foldersync - Keep an in-memory collection of files in sync with a directory."""
