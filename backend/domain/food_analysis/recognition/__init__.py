"""Recognition subdomain: image-type classification and label handling."""
