"""
Generators — produce TypeScript source from the content-type schema.

Each generator returns a ``GeneratedFile`` (or a plain string for the
smaller pieces) and never touches the filesystem itself; writing is
left to the sync job.
"""
