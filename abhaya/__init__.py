"""ABHAYA incident reporting backend."""
