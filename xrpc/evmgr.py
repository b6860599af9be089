#
# xrpc - Copyright (C) xrpc contributors.
#
# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 2.1 of the License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301
#


class EventManager(object):
    """A simple event system. Handlers are stored per event name in the order
    they were added, and adding a handler twice does not cause it to run
    twice.

    :class:`xrpc.server.Server` uses it to store its method handlers, keyed by
    the XML-RPC method name, next to the events it fires itself.
    """

    def __init__(self, parent, handlers=None):
        """Initializer for the ``EventManager`` instance.

        :param parent: The owner of this event manager.
        :param handlers: A dict of event name (string)/list of callables
            pairs. The dict is copied to the ``EventManager`` instance.
        """

        self.parent = parent
        self.handlers = {}

        if handlers is not None:
            for k, v in handlers.items():
                self.handlers[k] = list(v)

    def add_listener(self, event_name, handler):
        """Register a handler for the given event name."""

        handlers = self.handlers.setdefault(event_name, [])
        if not (handler in handlers):
            handlers.append(handler)

    def del_listener(self, event_name, handler=None):
        if handler is None:
            del self.handlers[event_name]
        else:
            self.handlers[event_name].remove(handler)

    def has_listener(self, event_name):
        return len(self.handlers.get(event_name, ())) > 0

    def fire_event(self, event_name, *args, **kwargs):
        """Run all the handlers for a given event name with the given
        arguments."""

        for handler in list(self.handlers.get(event_name, ())):
            handler(*args, **kwargs)
