"""Marketplace: multi-vendor storefront API (buyers, vendors, admins)."""
