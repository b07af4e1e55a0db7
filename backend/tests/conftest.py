import os

# Settings are read at import time by hypernetwork.main; give the required
# fields harmless values so tests never need a real .env.
os.environ.setdefault("NOTION_API_KEY", "secret_test")
os.environ.setdefault("HYPER_NETWORK_DATABASE_ID", "db-roster")
os.environ.setdefault("HYPER_NETWORK_HARD_SKILLS_DATABASE_ID", "db-skills")
os.environ.setdefault("HYPER_NETWORK_CONTACTS_DATABASE_ID", "db-contacts")
