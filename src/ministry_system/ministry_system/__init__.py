"""Ministry System package.

Children's ministry administration: attendance sessions, the points ledger,
leaderboards, fairness analytics, follow-ups and the parent portal. Organized
by feature modules with a thin Flask controller layer over service/repository
layers.
"""
