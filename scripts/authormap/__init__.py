"""authormap: git-tfs author file generator.

Walks an Azure DevOps Server / TFS instance (collections, projects,
application groups, members), resolves every user identity and writes a
deduplicated ``DOMAIN\\account = Name <mail>`` mapping file.
"""
