"""
Portfolio CMS

Content backend for a personal portfolio site:
1. Seven document collections (certificates, images, journey, landing pages,
   LinkedIn profile, Odoo modules, personal projects)
2. Read-through Redis cache with per-resource invalidation
3. Single-admin JWT authentication
4. Media uploads to S3 or the local filesystem
"""

__version__ = "1.0.0"
