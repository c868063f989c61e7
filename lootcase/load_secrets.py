import os
from dotenv import load_dotenv

load_dotenv()

user = os.getenv("DB_USER")
password = os.getenv("DB_PASSWORD")
host = os.getenv("DB_HOST")
port = os.getenv("DB_PORT")
db_name = os.getenv("DB_NAME")
sqlite_path = os.getenv("SQLITE_PATH", "lootcase.sqlite3")
pepper_data = os.getenv("PEPPER_DATA", "")

redis_host = os.getenv("REDIS_HOST", "redis")
redis_port = int(os.getenv("REDIS_PORT", "6379"))

max_open_quantity = int(os.getenv("MAX_OPEN_QUANTITY", "5"))
broadcast_queue_size = int(os.getenv("BROADCAST_QUEUE_SIZE", "50"))

if __name__ == "__main__":
    print(user, host, port, db_name, sqlite_path, redis_host, redis_port)
