"""Service Layer — transactional orchestration of core rules over storage protocols."""
