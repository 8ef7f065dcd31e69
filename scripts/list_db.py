import sys
from sqlalchemy import func, inspect
import database

try:
    database.init_engine()
    ins = inspect(database.engine)
except Exception as e:
    print(f'NO_ENGINE: {e}')
    sys.exit(0)
print('TABLES:', ins.get_table_names())
s = database.get_session()
try:
    rows = s.query(database.Game.platform, func.count(database.Game.id)).group_by(database.Game.platform).all()
    for platform, cnt in rows:
        print(f"games[{platform}]: {cnt}")
except Exception as e:
    print(f"games: ERROR {e}")
finally:
    s.close()
