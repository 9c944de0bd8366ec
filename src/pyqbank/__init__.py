"""Previous-year exam paper question extraction and import."""
