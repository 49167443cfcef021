"""Command-line workflow: configuration, collection, history and commands."""