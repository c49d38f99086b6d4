"""Food analysis domain - food image to nutritional estimate.

Classifies a food photo into an evidence regime (packaged, restaurant,
prepared), runs the matching estimation path, and produces calories,
weight and macronutrients with explicit uncertainty and provenance.
"""
