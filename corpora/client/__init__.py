"""HTTP client and data models for the Corpora API."""