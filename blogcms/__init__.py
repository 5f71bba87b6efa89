"""blogcms - travel blog CMS backend."""
