"""Code shared by the web service and its helpers: database, schemas, Redis."""
