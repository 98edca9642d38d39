"""Tests for MongoUserRepository against a mocked PyMongo database."""

import unittest
from unittest.mock import MagicMock, patch
from datetime import datetime, timezone

from bson.errors import InvalidDocument
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import COUNTERS_COLLECTION_NAME, USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import BackendError
from domain.model.user import UserFields

CREATED_AT = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)


def _doc(user_id=1, email='a@b.com') -> dict:
    return {
        '_id': user_id,
        'first_name': 'A',
        'last_name': 'B',
        'email': email,
        'password': '$2b$10$hash',
        'created_at': CREATED_AT,
    }


class MongoRepositoryTestCase(unittest.TestCase):

    def setUp(self):
        self.users = MagicMock()
        self.counters = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.side_effect = lambda name: {
            USERS_COLLECTION_NAME: self.users,
            COUNTERS_COLLECTION_NAME: self.counters,
        }[name]
        self.repo = MongoUserRepository(self.db)
        self.fields = UserFields('A', 'B', 'a@b.com', '$2b$10$hash')


class TestCreate(MongoRepositoryTestCase):

    @patch('adapter.mongodb.user_repository.datetime')
    def test_create_uses_counter_sequence(self, mock_datetime):
        mock_datetime.now.return_value = CREATED_AT
        self.counters.find_one_and_update.return_value = {'_id': 'users', 'seq': 7}

        user = self.repo.create(self.fields)

        self.assertEqual(user.id, 7)
        self.assertEqual(user.email, 'a@b.com')
        self.assertEqual(user.created_at, CREATED_AT)
        self.counters.find_one_and_update.assert_called_once_with(
            {'_id': USERS_COLLECTION_NAME},
            {'$inc': {'seq': 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        self.users.insert_one.assert_called_once_with(_doc(7))

    def test_create_duplicate_email_raises_backend_error(self):
        self.counters.find_one_and_update.return_value = {'seq': 2}
        self.users.insert_one.side_effect = DuplicateKeyError('E11000 duplicate key error')

        with self.assertRaises(BackendError) as ctx:
            self.repo.create(self.fields)

        self.assertIn('E11000', str(ctx.exception))


class TestReads(MongoRepositoryTestCase):

    def test_find_many_sorted_by_id(self):
        self.users.find.return_value.sort.return_value = [_doc(1), _doc(2, 'c@d.com')]

        users = self.repo.find_many()

        self.assertEqual([u.id for u in users], [1, 2])
        self.users.find.return_value.sort.assert_called_once_with('_id', 1)

    def test_find_by_id(self):
        self.users.find_one.return_value = _doc(3)

        user = self.repo.find_by_id(3)

        self.assertEqual(user.id, 3)
        self.assertEqual(user.first_name, 'A')
        self.users.find_one.assert_called_once_with({'_id': 3})

    def test_find_by_email_not_found(self):
        self.users.find_one.return_value = None

        self.assertIsNone(self.repo.find_by_email('missing@example.com'))
        self.users.find_one.assert_called_once_with({'email': 'missing@example.com'})

    def test_read_failure_raises_backend_error(self):
        self.users.find_one.side_effect = PyMongoError('connection reset')

        with self.assertRaises(BackendError) as ctx:
            self.repo.find_by_id(1)

        self.assertEqual(str(ctx.exception), 'connection reset')

    def test_id_outside_int64_raises_backend_error(self):
        self.users.find_one.side_effect = OverflowError('MongoDB can only handle up to 8-byte ints')

        with self.assertRaises(BackendError) as ctx:
            self.repo.find_by_id(2**70)

        self.assertIn('8-byte', str(ctx.exception))

    def test_unencodable_query_raises_backend_error(self):
        self.users.find_one.side_effect = InvalidDocument('cannot encode object')

        with self.assertRaises(BackendError):
            self.repo.find_by_email('a@b.com')


class TestWrites(MongoRepositoryTestCase):

    def test_update_sets_mutable_fields(self):
        self.users.find_one_and_update.return_value = _doc(4, 'c@d.com')

        user = self.repo.update(4, UserFields('A', 'B', 'c@d.com', '$2b$10$hash'))

        self.assertEqual(user.email, 'c@d.com')
        args, kwargs = self.users.find_one_and_update.call_args
        self.assertEqual(args[0], {'_id': 4})
        self.assertEqual(set(args[1]['$set']), {'first_name', 'last_name', 'email', 'password'})
        self.assertEqual(kwargs['return_document'], ReturnDocument.AFTER)

    def test_update_missing_raises_backend_error(self):
        self.users.find_one_and_update.return_value = None

        with self.assertRaises(BackendError):
            self.repo.update(99, self.fields)

    def test_delete(self):
        self.users.delete_one.return_value.deleted_count = 1

        self.repo.delete(5)

        self.users.delete_one.assert_called_once_with({'_id': 5})

    def test_delete_missing_raises_backend_error(self):
        self.users.delete_one.return_value.deleted_count = 0

        with self.assertRaises(BackendError):
            self.repo.delete(5)

    def test_delete_overflow_raises_backend_error(self):
        self.users.delete_one.side_effect = OverflowError('MongoDB can only handle up to 8-byte ints')

        with self.assertRaises(BackendError):
            self.repo.delete(2**70)


class TestEnsureIndexes(MongoRepositoryTestCase):

    def test_creates_unique_email_index(self):
        self.assertTrue(self.repo.ensure_indexes())

        self.users.create_index.assert_any_call([('email', 1)], name='idx_users_email', unique=True)

    def test_returns_false_on_unexpected_error(self):
        self.users.create_index.side_effect = PyMongoError('not authorized')

        self.assertFalse(self.repo.ensure_indexes())


if __name__ == '__main__':
    unittest.main()
