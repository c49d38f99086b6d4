"""Nutrition subdomain: macro calculation and calorie reconciliation."""
