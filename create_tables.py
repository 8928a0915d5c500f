from dailybudget.db.session import create_tables

if __name__ == "__main__":
    print("Creating tables...")
    create_tables()
    print("Tables created.")
